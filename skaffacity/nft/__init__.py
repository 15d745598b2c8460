"""Reserved for game NFTs; this package holds no modules yet."""