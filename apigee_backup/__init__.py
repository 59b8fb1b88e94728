"""
Apigee Backup: scheduled export of Apigee organizations to Google Cloud Storage.
"""

__version__ = "1.0.0"
