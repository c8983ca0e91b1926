"""wp-upkeep: keep the plugins and themes of local WordPress sites current."""
