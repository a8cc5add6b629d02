"""HTTP gateway for uploading, listing, deleting and downloading files kept in S3."""
