"""Field type handlers, one module per family of kintone field types."""
