#!/usr/bin/env python3
import sys

import ogg


def list_packets(file_name: str):
  total_bytes = 0
  num_packets = 0
  with open(file_name, "rb") as file:
    for i, packet in enumerate(ogg.iter_packets(file)):
      print("%i: %i bytes" % (i, len(packet)))
      total_bytes += len(packet)
      num_packets += 1
  print("%i packets, %i bytes" % (num_packets, total_bytes))


if __name__ == "__main__":
  args = [arg for arg in sys.argv[1:] if arg != "--debug"]
  if len(args) < 1:
    print("USAGE: %s inputfile [--debug]" % sys.argv[0])
    sys.exit()
  ogg.DEBUG = "--debug" in sys.argv
  list_packets(args[0])
