#!/usr/bin/env python3
import os
import subprocess
import sys

# Ensure stdout is unbuffered for container logs
os.environ['PYTHONUNBUFFERED'] = '1'

# Get PORT from environment, default to 8000
port = os.getenv('PORT', '8000')

print(f"[start.py] Starting application...", flush=True)
print(f"[start.py] PORT={port}", flush=True)
print(f"[start.py] DATABASE_URL={'set' if os.getenv('DATABASE_URL') else 'NOT SET (sqlite)'}", flush=True)
print(f"[start.py] DEEPSEEK_API_KEY={'set' if os.getenv('DEEPSEEK_API_KEY') else 'NOT SET (demo drafts)'}", flush=True)

# Start uvicorn with the correct port
cmd = [
    'uvicorn',
    'tweetcraft.main:app',
    '--host', '0.0.0.0',
    '--port', port
]

print(f"[start.py] Running: {' '.join(cmd)}", flush=True)
sys.exit(subprocess.call(cmd))
