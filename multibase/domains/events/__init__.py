"""Events domain: track/identify records and the debounced batch queue."""
