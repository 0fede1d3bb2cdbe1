"""voxelcollapse - constraint-propagation tile placement for 3D voxel grids."""

__version__ = "0.1.0"
