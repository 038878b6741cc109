# labquest

A few small terminal programs in one package:

- **Image relay** (`labquest.image_server`, `labquest.image_client`). A TCP
  server takes a reversed hex dump, decodes it and stores it as a `.jpeg` file.
  It also sends stored files back to the client.
- **Delivery dispatch** (`labquest.orders`, `labquest.delivery_agent`,
  `labquest.dispatcher`). An order book is shared between processes through a
  locked JSON file. Agents deliver Express orders and a dispatcher handles
  Reguler ones.
- **Dungeon** (`labquest.dungeon`, `labquest.shop`, `labquest.player`). A
  multiplayer text RPG served over TCP. It has a weapon shop, an inventory and
  turn-based battles.
- **Hunter arena** (`labquest.hunters`, `labquest.system_menu`,
  `labquest.hunter_menu`). Hunters and dungeons live in a shared world. One
  console administers the world and another is where the players take part.

## Installation

```
pip install .
```

The only runtime dependency is `filelock`. To run the tests:

```
pip install ".[test]"
pytest
```

## Image relay

```
labquest-image-server [--host HOST] [--port 8080] [--db-dir server/database] [--log server/server.log]
labquest-image-client [--host 127.0.0.1] [--port 8080] [--base-dir client]
```

The server handles one request per connection. Its replies:

| Request | Reply |
| --- | --- |
| `DECRYPT <hex>` | Reverses the hex text, decodes it to bytes and saves it as `<unix-time>.jpeg` in the database folder. Replies with the file name. |
| `DOWNLOAD <name>` | Sends the stored file's bytes. |
| `EXIT` | Replies `[EXIT] Client disconnected.` |
| anything else | An `[ERROR] ...` text. |

Every request is appended to the log as `[source][YYYY-mm-dd HH:MM:SS]: [action] [info]`.

The client menu has three choices:

1. Send a file from `<base-dir>/secrets/` for decryption.
2. Download a file into `<base-dir>/`. The whole reply is written to that file,
   and that includes the server's error text when the file does not exist.
3. Exit.

`handle_request(data, db_dir, log_path, now)` and `decode_payload(text)` can
also be called directly. Neither needs a socket.

## Delivery dispatch

The order book is kept in `delivery_orders.json`, guarded by
`delivery_orders.json.lock`. When the book is missing or empty, it is filled from
`delivery_order.csv`. That file has a header line, then one `name,address,type`
line per order, and at most 100 orders are read.

```
labquest-delivery-agent [--store delivery_orders.json] [--csv delivery_order.csv] [--log delivery.log] [--delay 1.0]
labquest-dispatcher -deliver NAME
labquest-dispatcher -status NAME
labquest-dispatcher -list
```

- **Agents.** Agents A, B and C run as threads. They keep delivering pending
  Express orders until none are left.
- **`-deliver`.** Marks the named pending Reguler order as
  `Delivered by Agent $USER`. When `USER` is not set, the agent name is
  `UNKNOWN`.
- **Other dispatcher commands.** `-status` and `-list` report the order book.
  The dispatcher always uses the default file names in the working directory.
- **Log.** Every delivery is appended to `delivery.log`.

## Dungeon

```
labquest-dungeon [--host HOST] [--port 8080]
labquest-player [--host 127.0.0.1] [--port 8080]
```

Each connection gets its own `Player`. A player starts with:

- 100 HP;
- 500 gold;
- a base damage of 5;
- `Fists` as the weapon.

The main menu offers stats, the shop, the inventory, battle mode and exit.

The shop sells Stone Spear, Diamond Sword, Buster Sword, Staff of Light and
Excalibur. Staff of Light has a 10% chance to kill the enemy outright. An
inventory holds up to 10 weapons.

In battle, each attack has a 10% chance of a critical hit, which doubles the
damage. Winning a fight pays gold and sends in a new monster. Dying restores
your HP, halves your gold and returns you to the main menu.

`Player.handle_command(command)` returns the text for one input line. It accepts
an optional `random.Random`, so games can be reproduced.

## Hunter arena

Start the system console first. It creates a fresh world in `hunter_world.json`,
and it deletes that world again on exit, at the end of input or on Ctrl-C.

```
labquest-system [--store hunter_world.json]
labquest-hunter [--store hunter_world.json]
```

From the system console you can:

- list hunters and dungeons;
- generate random dungeons (up to 100);
- ban, unban or reset hunters.

Hunters can:

- register (up to 100 hunters) and log in;
- list and raid the dungeons open to their level. 500 EXP raises the level by one.
- battle another hunter. The side with the higher total power takes the loser's
  stats, and the loser is deleted.
- toggle dungeon notifications. These refresh every 3 seconds until they are
  turned off or Ctrl-C is pressed.

Banned hunters cannot raid or battle. The hunter console ends when the system
console shuts the world down.

## What it does not do

- The image server and the dungeon server run in the foreground. They do not
  detach into the background.
- The order book and the hunter world are plain JSON files in the working
  directory, not operating-system shared memory.
- Nothing authenticates users. Knowing a name is enough to act as a hunter,
  and any client may connect to the servers.