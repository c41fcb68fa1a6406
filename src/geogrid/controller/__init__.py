"""
The CONTROLLER layer turns map state into grid output.
It reads the map only through `geogrid.model.map_view.MapView` and pushes
line geometry and labels back through the same interface.
"""
