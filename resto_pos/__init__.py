"""Point-of-sale core and terminal front-end for a small restaurant."""
