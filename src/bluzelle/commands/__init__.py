"""
Commands - CLI command implementations for the Bluzelle client.

- account: whoami, keygen, account, version
- crud:    create, update, delete, rename, read, has, keys, keyvalues,
           count, delete-all
- lease:   lease, renew-lease, shortest-leases
"""
