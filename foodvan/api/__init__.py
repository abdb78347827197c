"""HTTP routers of the customer and vendor backends."""
