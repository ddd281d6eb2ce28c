#!/usr/bin/env python3
import argparse
import json
import logging
import os
from datetime import datetime

from core import ExifDataParser
from exif_extract import ExifExtractor
from file_types import all_extensions
from image_info import ImageInfo


def find_images(root, recursive=False):
    exts = all_extensions()
    if os.path.isfile(root):
        yield root
        return
    if not os.path.exists(root):
        return

    if recursive:
        for dirpath, dirs, files in os.walk(root):
            for f in sorted(files):
                if os.path.splitext(f)[1].lower() in exts:
                    yield os.path.join(dirpath, f)
    else:
        for f in sorted(os.listdir(root)):
            full = os.path.join(root, f)
            if os.path.isfile(full) and os.path.splitext(f)[1].lower() in exts:
                yield full


def write_json(metadata, src_path, out_dir=None, suffix='_metadata'):
    base = os.path.basename(src_path)
    name = os.path.splitext(base)[0]
    out_name = f"{name}{suffix}.json"
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
        out_path = os.path.join(out_dir, out_name)
    else:
        out_path = os.path.join(os.path.dirname(src_path), out_name)

    payload = {
        'source_file': os.path.abspath(src_path),
        'extracted_at': datetime.now().isoformat(),
        'metadata': metadata
    }
    with open(out_path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return out_path


def build_parser():
    parser = argparse.ArgumentParser(description='Decode EXIF metadata of images into JSON')
    parser.add_argument('path', help='Image file or directory to process')
    parser.add_argument('--recursive', '-r', action='store_true', help='Recurse directories')
    parser.add_argument('--out', '-o', help='Output directory for JSON files')
    parser.add_argument('--limit', type=int, default=0, help='Limit number of files processed (0 = no limit)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log debug details')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # one parser for the whole run: the timezone index is expensive to load
    parser = ExifDataParser()
    parser.schema.warm()
    extractor = ExifExtractor()

    count = 0
    failed = 0
    for img in find_images(args.path, recursive=args.recursive):
        if args.limit and count >= args.limit:
            break
        try:
            print(f"Processing: {img}")
            info = ImageInfo(img, parser=parser, extractor=extractor).exif()
            out_path = write_json(info.to_dict(), img, out_dir=args.out)
            print(f"Saved metadata -> {out_path}\n")
            count += 1
        except Exception as e:
            print(f"Failed {img}: {e}")
            failed += 1

    print(f"Done. Processed: {count}")
    return 1 if failed else 0


if __name__ == '__main__':
    raise SystemExit(main())
