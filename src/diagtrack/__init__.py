"""diagtrack - diagnostic tracking, filtering and rendering."""
