"""HTTP service exposing the legislative graph."""
