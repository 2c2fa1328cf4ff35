# -*- coding: utf-8 -*-
#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

__version__ = '0.3.0'
