"""
Model catalog feature: CRUD, latest and search over the `models` collection.
"""
