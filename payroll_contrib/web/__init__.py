"""Web layer helpers shared by the routers."""
