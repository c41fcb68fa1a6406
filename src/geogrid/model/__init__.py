"""
The MODEL layer contains pure data structures and map math.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
It deals with grid geometry, zoom densities, label text and camera transforms.
"""
