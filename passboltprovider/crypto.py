#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

import contextlib

import pgpy


def load_private_key(armored_key, passphrase=None):
    """Parse an ASCII-armored private key and make sure the passphrase opens it."""
    key, _ = pgpy.PGPKey.from_blob(armored_key)
    if key.is_public:
        raise ValueError('Key material is a public key, a private key is expected')
    with unlock_key(key, passphrase):
        pass
    return key


def load_public_key(armored_key):
    key, _ = pgpy.PGPKey.from_blob(armored_key)
    return key


def unlock_key(key, passphrase):
    if key.is_protected:
        return key.unlock(passphrase or '')
    return contextlib.nullcontext(key)


def get_fingerprint(key):    # type: (pgpy.PGPKey) -> str
    return str(key.fingerprint).replace(' ', '').upper()


def sign_and_encrypt_message(text, private_key, passphrase, public_key):
    # type: (str, pgpy.PGPKey, str, pgpy.PGPKey) -> str
    message = pgpy.PGPMessage.new(text)
    with unlock_key(private_key, passphrase):
        message |= private_key.sign(message)
    encrypted = public_key.encrypt(message)
    return str(encrypted)


def decrypt_message(armored_message, private_key, passphrase):    # type: (str, pgpy.PGPKey, str) -> str
    message = pgpy.PGPMessage.from_blob(armored_message)
    with unlock_key(private_key, passphrase):
        decrypted = private_key.decrypt(message)
    data = decrypted.message
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode('utf-8')
    return data
