"""Named constants shared across imshow."""
