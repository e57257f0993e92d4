"""TV Gateway: asset canonicalisation, static serving and upstream proxying."""
