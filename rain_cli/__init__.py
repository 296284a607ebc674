"""Digital rain with depth for your terminal."""
