"""Agent management: listing, health, accept/reject/remove."""
