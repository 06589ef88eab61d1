"""
Constants shared by the Drip client test modules.
"""

API_KEY = "test-api-key-12345"
ACCOUNT_ID = "9999999"
BASE = f"https://api.getdrip.com/v2/{ACCOUNT_ID}"
MEDIA_TYPE = "application/vnd.api+json"
