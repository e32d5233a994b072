"""Starter snapraid-runner.yml template."""

DEFAULT_YAML = """\
# snapraid-runner configuration
snapraid_bin: /usr/bin/snapraid
snapraid_config: /etc/snapraid.conf

# Directory for one JSON result file per run. Leave empty to disable.
output_dir: ""

# Abort before sync when a category exceeds its limit. -1 disables a limit.
thresholds:
  add: -1
  remove: 80
  update: 400
  copy: -1
  move: -1
  restore: -1

steps:
  touch: false
  scrub: false
  smart: false

scrub:
  plan: 22          # percent of the array to verify per run (0-100)
  older_than: 12    # only blocks not scrubbed for this many days

notifications:
  slack_token: ""   # or SNAPRAID_RUNNER_SLACK_TOKEN
  slack_channel: "" # or SNAPRAID_RUNNER_SLACK_CHANNEL
  web: ""
"""

DEFAULT_CONFIG_NAME = "snapraid-runner.yml"
