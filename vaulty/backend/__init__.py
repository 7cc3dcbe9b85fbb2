"""External secret providers driven through their command-line tools, with a TTL cache."""