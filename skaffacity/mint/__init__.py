"""Minting parameters, their validation and their parameter-store subspace."""