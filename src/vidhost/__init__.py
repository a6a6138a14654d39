"""vidhost: video record store and published-video listing."""
