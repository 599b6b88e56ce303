"""
Download recording feature over the `downloads` collection.
"""
