VERSION = "2025.10.0"
