"""Nextcloud WebDAV gateway and generic path proxy."""
