"""Node indexing shared by every matrix derived from an interaction graph."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import networkx as nx

from wppi_pipeline.errors import InputError

# Node attribute holding the gene symbol of a protein node
GENE_SYMBOL_ATTR = "gene_symbol"


@dataclass(frozen=True)
class NodeIndex:
    """Immutable position assignment for the nodes of one graph.

    Row and column ``i`` of every adjacency, weight and probability matrix
    refer to ``protein_ids[i]``. Gene symbols are not unique: several
    proteins may share one symbol, and a protein listed without a symbol
    keeps None, which never matches a seed or annotation gene.

    Attributes:
        protein_ids: Node identifiers (protein accessions) in graph order
        gene_symbols: Gene symbol of each node, aligned with protein_ids
        position: Mapping protein_id -> matrix position
    """

    protein_ids: tuple[str, ...]
    gene_symbols: tuple[str | None, ...]
    position: Mapping[str, int] = field(repr=False)

    @classmethod
    def from_graph(cls, graph: nx.MultiDiGraph) -> "NodeIndex":
        """
        Freeze the node order of a graph.

        Raises:
            InputError: If the graph has no nodes
        """
        if graph.number_of_nodes() == 0:
            raise InputError("The interaction graph is empty: no proteins to score.")

        protein_ids = tuple(str(node) for node in graph.nodes)
        symbols = (data.get(GENE_SYMBOL_ATTR) for _, data in graph.nodes(data=True))
        gene_symbols = tuple(None if symbol is None else str(symbol) for symbol in symbols)
        position = MappingProxyType({pid: i for i, pid in enumerate(protein_ids)})
        return cls(protein_ids=protein_ids, gene_symbols=gene_symbols, position=position)

    def __len__(self) -> int:
        return len(self.protein_ids)

    def positions_of_genes(self, genes) -> list[int]:
        """Positions of all nodes whose gene symbol is in ``genes``."""
        wanted = set(genes)
        return [
            i for i, symbol in enumerate(self.gene_symbols)
            if symbol is not None and symbol in wanted
        ]
