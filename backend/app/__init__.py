"""StoreIt backend: file storage and sharing on top of an Appwrite backend."""

__version__ = "0.1.0"
