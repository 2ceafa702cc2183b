# app/cli/generate_jwt_key.py
"""
JWT_SECRET 생성기

    proximashare-generate-jwt-key            # 256bit
    proximashare-generate-jwt-key --bytes 64
"""
import argparse

from app.utils.security import generate_secret_key


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a base64 encoded JWT secret key.")
    parser.add_argument("--bytes", type=int, default=32, help="Number of random bytes (default: 32)")
    args = parser.parse_args(argv)

    key = generate_secret_key(args.bytes)
    print(f"Generated Key (Base64 Encoded): {key}")
    print(f"JWT_SECRET={key}")


if __name__ == "__main__":
    main()
