from models.db_storage import DBStorage

# Process-wide storage; bound to a database by create_app() via storage.reload(url)
storage = DBStorage()
