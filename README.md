# respot

`respot` gives you the building blocks of a music-streaming client:

- **Metadata models** (`respot.catalog`, `respot.podcast`, `respot.playlist`,
  `respot.playlist_item`, `respot.playlist_attribute`, `respot.restriction`,
  `respot.basic`, `respot.audio_files`, `respot.lyrics`). These cover albums,
  artists, tracks, episodes, shows, playlists, their restrictions,
  availabilities and sale periods, and lyrics.
- **Playable items** (`respot.audio_item`). A track or episode is checked
  against the current user's country, catalogue and the current time.
- **Playback configuration** (`respot.config`). It holds bitrates, output
  sample formats, and the normalisation and volume-control settings.
- **Audio sinks** (`respot.audio_backend`, `respot.subprocess_sink`). One
  sink writes raw samples to standard output or to a file. The other feeds
  them to the standard input of a shell command.
- **Device discovery** (`respot.discovery`). This is an HTTP endpoint and an
  mDNS responder. Clients on the local network can find the device and hand
  over login credentials.

The only runtime dependency is `cryptography`.

## Configuration values

Settings arrive as text, for example from a command line, and are parsed into
enums:

```python
from respot.config import AudioFormat, Bitrate, NormalisationType, PlayerConfig, VolumeCtrl

Bitrate.parse("320")                 # Bitrate.BITRATE_320
AudioFormat.parse("s24_3").size()    # 3 bytes per sample
NormalisationType.parse("album")     # NormalisationType.ALBUM
VolumeCtrl.parse("log", 60.0)        # VolumeCtrl(kind=VolumeCtrlKind.LOG, db_range=60.0)
PlayerConfig()                       # 160 kbit/s, gapless, normalisation off
```

Parsing is case-insensitive for formats, normalisation and volume control. If
the text names no known value, `ValueError` is raised.

## Metadata

Each model is built with a `from_message` class method. Its input is a decoded
message given as a mapping keyed by protobuf field name. A key that is absent
takes the protobuf default.

```python
from respot.catalog import Album
from respot.restriction import parse_country_codes
from respot.lyrics import Lyrics

parse_country_codes("SEDKNO")        # ["SE", "DK", "NO"]

album = Album.from_message({"name": "Example", "disc": [{"track": [{"gid": b"\x01" * 16}]}]})
list(album.tracks())                 # track ids of every disc, in order

lyrics = Lyrics.from_json(raw_json_bytes)
for line in lyrics.lyrics.lines:
    print(line.start_time_ms, line.words)
```

Some helpers:

- `CountryTopTracks.for_country` falls back to the global list.
- `Artist.albums_current()` and its siblings give only the current release of
  each album.
- `Playlist.tracks()` logs a warning if the item count differs from the stated
  length.
- `respot.playlist.annotation_uri` builds the address of a user's playlist
  annotation.

`respot.audio_item.AudioItem.from_track` and `AudioItem.from_episode` turn a
model into a playable item:

- A duration that is zero or less raises `InvalidDurationError`.
- An explicit item raises `ExplicitContentFilteredError` when filtering is on.
- The `availability` field is `None` if the user may play the item.
  Otherwise it holds an `UnavailabilityReason`: an embargo, or a country
  whitelist or blacklist.

## Audio output

```python
from respot.audio_backend import backend_names, find
from respot.config import AudioFormat

print(backend_names())               # ["pipe", "subprocess"]
builder = find("pipe")               # find(None) gives the default backend
with builder("out.raw", AudioFormat.S16) as sink:
    sink.write(sample_bytes)
```

A sink is a context manager: `start()` on entry and `stop()` on exit.

- `StdoutSink` writes to standard output, or to the named file. The file is
  created if it is missing.
- `SubprocessSink` splits its command shell-style and starts it. It writes to
  the command's standard input and restarts the command at most once per
  `write` if writing fails.

Passing `"?"` as the device to either sink prints a usage note and exits.
Failures raise subclasses of `respot.errors.SinkError`:
`SinkNotConnectedError`, `SinkConnectionRefusedError`, `SinkWriteError` and
`SinkInvalidParamsError`. `register_backend(name, builder)` adds another
backend or replaces an existing one.

## Discovery

```python
from respot.discovery import Discovery

builder = Discovery.builder(device_id, client_id, keys)
with builder.name("Living Room").device_type("Speaker").port(0).launch() as discovery:
    credentials = discovery.next_credentials(timeout=60)
```

`keys` is any object with two methods. `public_key()` returns bytes, and
`shared_secret(remote_key)` returns the Diffie-Hellman shared secret.

The server answers `getInfo` and `addUser` requests. Each credential blob is
checked with HMAC-SHA1 and then decrypted with AES-128-CTR. If the MAC does not
match, the reply has an `ERROR-MAC` status and no credentials are delivered.

`next_credentials` returns `None` on timeout or once the service is closed.
Iterating over a `Discovery` yields credentials until it is closed.
`RequestHandler` and `decrypt_blob` can also be used without starting a
server.

## What this package does not do

`respot` does not connect to the streaming service, log in, or fetch
metadata, lyrics or audio over the network. Messages must be decoded by the
caller: no protobuf definitions are included.

It does not generate Diffie-Hellman keys for discovery. It has no audio
decoder, player or volume mixer, and no sinks for sound hardware or
sound servers. Only the pipe and subprocess sinks exist. There is no
command-line program.