"""mview compiler: markup in, builder calls out."""
