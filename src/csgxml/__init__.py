"""csgxml: OpenSCAD .csg to xcsg XML translator."""

__version__ = "0.1.0"
