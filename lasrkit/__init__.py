"""Point cloud building blocks: grids, index grouping, point schemas, headers, filters, in-memory rasters, memory queries and Drawflow pipeline parsing."""

__version__ = "0.1.0"