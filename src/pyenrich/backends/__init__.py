"""Integration kernels used by the IMF."""
