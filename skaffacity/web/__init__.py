"""Web interface configuration, its messages, keeper, genesis and developer fee distribution."""