"""Banana console client: view state, store and presentation controllers."""
