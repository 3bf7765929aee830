"""Business logic: sessions, AI gateway, import/export."""
