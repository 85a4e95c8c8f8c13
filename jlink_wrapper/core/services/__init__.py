"""Services: the building blocks of the image pipeline."""
