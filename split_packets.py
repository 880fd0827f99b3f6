#!/usr/bin/env python3
import sys
from pathlib import Path

import ogg


def split_packets(file_name: str, outdir: Path):
  outdir.mkdir(parents=True, exist_ok=True)
  if any(outdir.iterdir()):
    raise FileExistsError("Refusing to write into non-empty directory: %s" % outdir)
  with open(file_name, "rb") as file:
    for i, packet in enumerate(ogg.iter_packets(file)):
      Path(outdir, "%i.opus" % i).write_bytes(packet)


if __name__ == "__main__":
  args = [arg for arg in sys.argv[1:] if arg != "--debug"]
  if len(args) < 2:
    print("USAGE: %s inputfile outdir [--debug]" % sys.argv[0])
    sys.exit()
  ogg.DEBUG = "--debug" in sys.argv
  split_packets(args[0], Path(args[1]))
