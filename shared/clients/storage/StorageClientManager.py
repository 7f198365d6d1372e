from shared.clients.ClientManager import ClientManager
from shared.clients.storage.StorageClientInterface import StorageClientInterface


class StorageClientManager(ClientManager):
    """Instantiates the object store client named by STORAGE_ENGINE (default "supabase")."""

    client_type = "storage"
    class_prefix = "StorageClient"
    default_engine = "supabase"

    def get_client(self) -> StorageClientInterface:
        return self.client
