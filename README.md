# userauth

A small user account service served over gRPC. It creates, reads, updates
and deletes users kept in a SQL table named `users`, and logs every SQL
statement it runs with its arguments filled in.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Configuration

`userauth.config.load(path)` reads a dotenv file; variables already set in
the environment are not overridden. Settings then come from the environment:

| Variable    | Meaning                                  |
|-------------|------------------------------------------|
| `GRPC_HOST` | host the gRPC server listens on          |
| `GRPC_PORT` | port the gRPC server listens on          |
| `PG_DSN`    | connection string for the database       |

An empty or missing variable raises `userauth.config.ConfigError`
(`GRPCConfig.from_env()`, `PGConfig.from_env()`). IPv6 hosts are put in
brackets by `GRPCConfig.address()`.

The command uses a built-in SQLite connector, which accepts DSNs of the form
`sqlite://<path>`. Example `.env`:

```
GRPC_HOST=localhost
GRPC_PORT=50051
PG_DSN=sqlite://users.db
```

## Database table

The service does not create its table. It expects a table `users` with the
columns `id`, `name`, `email`, `role`, `password`, `created_at` and
`updated_at`, where `created_at` is filled in by the database. For SQLite
(3.35 or later, for `RETURNING`):

```sql
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    role INTEGER NOT NULL,
    password TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP
);
```

## Running

```
userauth --config-path .env
```

The command exits with status 1 and logs the error if the configuration file
cannot be read, a variable is missing, the database cannot be reached, or the
server cannot listen on its address.

The server registers the service `user_v1.UserV1` with four unary methods.
Requests and responses are JSON objects whose keys are the fields of the
dataclasses in `userauth.converter`:

- **Create** (`CreateRequest`: `name`, `email`, `role`, `password`,
  `password_confirm`): fails with status `UNKNOWN` if the two passwords
  differ. Otherwise it stores the user under a fresh random non-negative
  64-bit id and returns `{"id": ...}`.
- **Get** (`GetRequest`: `id`): returns `id`, `name`, `email`, `role`,
  `created_at` and `updated_at` (`null` until the user is first updated),
  with times in ISO 8601.
- **Update** (`UpdateRequest`: `id`, `name`, `email`): writes only the fields
  that are not `null` and always sets `updated_at`. Returns `{}`.
- **Delete** (`DeleteRequest`: `id`): removes the user. Returns `{}`.

Storage failures are reported with status `INTERNAL`.

A client built with `grpcio` alone:

```python
import json
import grpc

channel = grpc.insecure_channel("localhost:50051")
get = channel.unary_unary(
    "/user_v1.UserV1/Get",
    request_serializer=lambda message: json.dumps(message).encode(),
    response_deserializer=json.loads,
)
print(get({"id": 42}))
```

When the server stops, every callback registered with `userauth.closer`
(the database client's `close`, for one) is run once, concurrently.

## Using the pieces directly

`userauth.app.App(config_path, connector)` and
`userauth.app.ServiceProvider(connector)` take any callable that opens a
DB-API connection from the DSN. Its `paramstyle` attribute, if present, names
the numbered placeholder marker: `"$"` for `$1` (the default) or `"?"` for
`?1`.

The layers can also be put together by hand:

```python
import sqlite3

from userauth.db import connect
from userauth.model import User, UserChangable
from userauth.repository import UsersRepository
from userauth.service import UsersService

client = connect("users.db", sqlite3.connect, "?")
service = UsersService(UsersRepository(client))

password = "password"
user_id = service.create(
    User(name="Ann", email="ann@example.com", role=1,
         password=password, password_confirm=password)
)
service.update(UserChangable(id=user_id, name="Anna"))
print(service.get(user_id))
client.close()
```

`UsersService.create` raises `userauth.service.PasswordMismatchError` when
the passwords differ; repository failures raise
`userauth.repository.RepositoryError`, whose `code` is a `grpc.StatusCode`.
`userauth.db.Database` raises `RowNotFoundError` when a query that must
return a row returns none.

`userauth.prettier.pretty` renders a query with its placeholders replaced by
the argument values, as the service logs it:

```python
from userauth.prettier import pretty

pretty("SELECT * FROM users WHERE id = $1 AND name = $2", "$", 7, "Ann")
# 'SELECT * FROM users WHERE id = 7 AND name = "Ann"'
```

## What it does not do

- It ships no PostgreSQL driver: the command only opens `sqlite://` DSNs, and
  other databases need a connector passed to `App`.
- Messages are JSON, not Protocol Buffers, and server reflection is not
  offered.
- It does not create or migrate the `users` table.
- It serves without TLS and does not hash passwords; they are stored as given.