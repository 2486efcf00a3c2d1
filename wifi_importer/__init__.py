"""Wi-Fi network CSV importer.

Converts a 3-column CSV (ssid, password, security type) into network
suggestions and hands them to a registration backend, either in one bulk
call or in fixed-size batches.
"""

__version__ = "0.1.0"
