"""
cornertile: corner-configuration autotiling.

Offline, ``cornertile.generators.enumerator`` enumerates every distinct way
the eight corners of a lattice position can be labelled and authors a bevel
mesh for each class. At runtime, ``cornertile.generators.matcher`` samples an
occupancy grid and picks the authored tile (and its rotation/flip) for every
affected lattice position.
"""

__version__ = "0.1.0"
