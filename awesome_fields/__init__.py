"""Convention-over-configuration form fields for Django."""
