"""Post form and content block editor widgets."""
