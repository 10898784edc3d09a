# sun3boot

Building blocks of a small Sun-3 network boot monitor as a plain Python
library: the monitor's printf, a polled serial console, hex dumps, the
Ethernet, ARP, IP, UDP and TFTP wire formats, the AMD 7990 LANCE memory
structures, and a TFTP boot loader. Only the standard library is used.

## Modules

| Module               | Contents |
|----------------------|----------|
| `sun3boot.fmt`       | `cformat`, the monitor's printf with a bounded output size, and `show_reg`. |
| `sun3boot.console`   | `Console`: CR/LF handling, echoing line input and `printf` over a reader and a writer. |
| `sun3boot.dump`      | `dump_lines` and `dump_buf`: sixteen bytes per line, each line prefixed by its address. |
| `sun3boot.textutil`  | `hextoi`, `atoi`, `split`, `describe_command` and the interactive `command_loop`. |
| `sun3boot.params`    | Sun-3 page, segment and disk-block constants and conversions (`ctos`, `stoc`, `ptos`, `ctod`, `dtoc`, `dtob`, `ctob`, `btoc`). |
| `sun3boot.ether`     | `MacAddress`, `EtherHeader`, `EtherArp`, `UdpHeader`, `IdProm`, and the `ArpOp`, `TftpOpcode` and `TftpErrorCode` enums. |
| `sun3boot.lance`     | LANCE CSR0 bits (`Csr0`), `RingPointer`, `InitBlock`, `MessageDescriptor` and `swap_station_address`. |
| `sun3boot.inet`      | `IpHeader`, `InetState`, `Inet` (ARP, reverse ARP, IP in and out), `ip_checksum`, `in_lnaof`, `inet_format`, `ether_format`. |
| `sun3boot.netif`     | `InterfaceFlags`, `ArpFlags` and `IfQueue`, a FIFO with a soft length limit and a drop counter. |
| `sun3boot.tftp`      | `TftpClient`, `TftpError`, `build_read_request` and `tftp_error_message`. |

## Formatting

`cformat` follows the monitor's rules, not C's: `%d` is a signed 32-bit
decimal, `%x` prints the low byte as two upper-case hex digits, `%X` and
`%h` print eight upper-case hex digits, `%c` and `%s` insert a character
and a string. Any other character after `%` is dropped without taking an
argument. Output is cut to `size - 1` characters.

```python
from sun3boot.fmt import cformat

cformat("Tick %d\n", 7, size=128)         # 'Tick 7\n'
cformat("SR = %X\n", 0x2700, size=128)    # 'SR = 00002700\n'
```

## Console

`Console(reader, writer)` reads one character per call of `reader()` (an
empty string or `None` ends input with `EOFError`) and sends text through
`writer(text)`. Input is masked to seven bits, CR becomes LF, and each
character is echoed.

```python
from sun3boot.console import Console

chars = iter("hi\r")
sent = []
con = Console(lambda: next(chars, ""), sent.append)
con.gets()    # 'hi'
```

`command_loop(console)` prints the `Ready% ` prompt, reports each line
with `describe_command`, and returns on a line starting with `q` or at the
end of input.

## Dumps

```python
from sun3boot.dump import dump_buf

dump_buf(b"\x00\x01", base=0x4000)    # '00004000  00 01 \n'
```

## Packets

The wire structures pack to and unpack from `bytes` in network byte order:

```python
from sun3boot.ether import EtherHeader

header = EtherHeader.unpack(frame[:14])
assert header.pack() == frame[:14]
```

## Network boot

`Inet(nif, clock, out)` works over an interface object that has a `mac`
attribute and `xmit(frame)`, `poll()` and `reset()` methods, a clock
returning milliseconds, and an optional sink for progress messages.
`Inet.init()` learns its own IP address by reverse ARP; `ip_output`
resolves the peer by ARP when the destination changes, and `ip_input`
answers ARP requests for our address and returns IP frames sent to us.

`TftpClient(inet, clock, unit, out).load()` sends a read request for a
file named after our IP address in eight hex digits, in octet mode,
acknowledges each block and returns the file's bytes at the first block
shorter than 512 bytes. With a non-zero unit the server is the host with
that number on our network, and a server error or time-out raises
`TftpError`. Unit 0 is an autoboot: it asks the host that answered
reverse ARP first, then broadcasts, ignores errors on the first block and
starts over instead of raising.

## What it does not do

There is no network driver: nothing here talks to a LANCE chip or any
other hardware, so `Inet` needs an interface object supplied by the
caller. The LANCE module only describes the chip's registers and memory
structures. There is no command-line program.

## Running the tests

Install the `test` extra and run `pytest`.