"""Access to the object store backing the operator."""
