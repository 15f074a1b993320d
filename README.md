# rangerclient

Building blocks for a client of a game-matchmaking chat service: encoding and
decoding of the binary packets the server speaks, and the bookkeeping a client
needs to follow the public lobbies and the users in them.

You feed it payload bytes that came off the connection and get plain Python
objects back; for the other direction it gives you the bytes to write.

## Installing

```
pip install rangerclient
```

To run the test suite:

```
pip install "rangerclient[test]"
pytest
```

## What is in it

| Module | Purpose |
| --- | --- |
| `rangerclient.wire` | `PayloadReader` reads big-endian integers (`read_u8`, `read_u16`, `read_u32`), raw bytes and NUL-terminated strings; `encode_cstring` writes such a string. A read past the end raises `PayloadError`. |
| `rangerclient.framing` | `Packet` and `decode_header` for the eight-byte header (command, payload length); `PacketCounter` computes the check byte; `PacketWriter` appends it to every command not listed as uncounted. |
| `rangerclient.plugin` | `Plugin` game descriptions read from plugin files (`load_plugin`, `Plugin.from_bytes`), `icon_to_rgb` for 16x16 palette icons, and `plugin_sort_key`. |
| `rangerclient.games` | The games bit field (`encode_games_list`, `decode_games_list`) and the plugin list sent at login (`encode_plugin_list`). |
| `rangerclient.login` | `parse_my_user_info` (`MyUserInfo`), `parse_ban_time`, `format_ban_time` and `parse_server_message`. |
| `rangerclient.loginpacket` | `LoginRequest` and `build_login_payload`, with `obfuscate_mac` and `lan_ip_field`. |
| `rangerclient.lobby` | Parsers for the lobby list, a lobby's user list, user moves and chat lines, and `LobbyState`, which follows joins, leaves and user counts and builds the request for missing icons. |
| `rangerclient.rooms` | Game room user lists, private messages, the launch password, `build_join_game_room`, and the notices shown in chat. |
| `rangerclient.banners` | `parse_banners`, `banner_extension` and `save_banner`. |
| `rangerclient.outgoing` | Small request payloads: joining a lobby, asking for user info, a line of text, a password change, the keep-alive. |

## Examples

Following the lobbies and asking to join one:

```python
from rangerclient.framing import PacketWriter
from rangerclient.lobby import LobbyState, parse_public_lobby_list
from rangerclient.outgoing import build_join_lobby

state = LobbyState()
state.replace_lobbies(parse_public_lobby_list(payload))

lobby = state.find(1)
if lobby is not None:
    writer = PacketWriter(uncounted_commands=set())
    raw = writer.encode(JOIN_PUBLIC_LOBBY, build_join_lobby(lobby.lobby_id))
    sock.sendall(raw)
```

Here `payload`, `sock` and the command number `JOIN_PUBLIC_LOBBY` come from
your own connection code; the package defines no command numbers.

The games bit field:

```python
from rangerclient.games import decode_games_list, encode_games_list

encode_games_list([1, 3])          # b"\x01\x05"
decode_games_list(b"\x01\x05")     # [1, 3]
```

Building a login payload by e-mail address:

```python
from rangerclient.loginpacket import LoginRequest, build_login_payload

password = "password"
request = LoginRequest(password=password, email="player@example.com")
body = build_login_payload(request, plugins, ready_payload)
```

`plugins` is a list of `Plugin` objects and `ready_payload` is the payload of
the server's ready-to-process packet, whose first four bytes close the login
payload. The checksum is taken as given in `LoginRequest.checksum`; the
package does not compute it.

Every integer on the wire is big-endian, and strings are NUL-terminated bytes
with one character per byte. A payload that ends before a field it should
hold raises `rangerclient.wire.PayloadError`.

## What it does not do

- It opens no connections and reads or writes no sockets.
- It has no windows, no chat screen and no command to run.
- It does not decode user profile replies, icon data or icon change notices,
  and it keeps no icon cache or log.
- It does not compute the login checksum or store account profiles.