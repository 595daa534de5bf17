"""Course messaging API: compose sessions and user signatures."""
