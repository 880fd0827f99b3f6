#!/usr/bin/env python3
import sys

import ogg


def extract_opus(input_file_name: str, output_file_name: str):
  with open(input_file_name, "rb") as input_file:
    if output_file_name != '-':
      output_file = open(output_file_name, "wb")
    else:
      output_file = sys.stdout.buffer
    try:
      ogg.decode_buffered(output_file, input_file)
    finally:
      if output_file is not sys.stdout.buffer:
        output_file.close()


if __name__ == "__main__":
  args = [arg for arg in sys.argv[1:] if arg != "--debug"]
  if len(args) < 2:
    print("USAGE: %s inputfile outputfile [--debug]\nSetting the outputfile arg to - writes the output to stdout" %
          sys.argv[0])
    sys.exit()
  ogg.DEBUG = "--debug" in sys.argv
  extract_opus(args[0], args[1])
