"""Command-line interface."""
from geogrid.main import main

if __name__ == "__main__":
    main()
