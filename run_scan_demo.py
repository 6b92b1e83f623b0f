import argparse
import json

from config import setup_logging
from scanner import scan_image


def main():
    parser = argparse.ArgumentParser(description="Scan the MRZ of a national ID card photo")
    parser.add_argument("image", help="Image file path, http(s) URL or base64 data URL")
    parser.add_argument("--td3", action="store_true", help="Also accept passport (TD3) MRZ")
    parser.add_argument("--timeout", type=float, default=None, help="Scan budget in seconds")
    args = parser.parse_args()

    setup_logging()

    result = scan_image(args.image, allow_td3=args.td3 or None, timeout=args.timeout)
    print(json.dumps(result.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    main()
