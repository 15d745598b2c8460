"""Reserved for player staking; this package holds no modules yet."""