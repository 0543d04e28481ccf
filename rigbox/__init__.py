"""rigbox: drive existing test instances through converge, setup and verify over SSH."""
