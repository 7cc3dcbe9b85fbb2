"""Daemon protocol, client, desktop notifications and PID/process helpers."""