from shared.clients.ClientManager import ClientManager
from shared.clients.db.DBClientInterface import DBClientInterface


class DBClientManager(ClientManager):
    """Instantiates the database client named by DB_ENGINE (default "supabase")."""

    client_type = "db"
    class_prefix = "DBClient"
    default_engine = "supabase"

    def get_client(self) -> DBClientInterface:
        return self.client
