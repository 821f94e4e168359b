"""Static marketing content served to the site."""
from pydantic import BaseModel


class Testimonial(BaseModel):
    id: str
    name: str
    role: str
    content: str
    rating: int
    image: str


class FAQItem(BaseModel):
    id: str
    question: str
    answer: str


TESTIMONIALS: list[Testimonial] = [
    Testimonial(
        id="1",
        name="Mariana Silva",
        role="Designer de Sobrancelhas",
        content=(
            "O curso de Micropigmentação Fio a Fio mudou completamente minha carreira! "
            "A Ju é uma profissional incrível, ensina com amor e dedicação. Hoje atendo "
            "várias clientes por semana com total segurança."
        ),
        rating=5,
        image="/assets/testimonial-1.webp",
    ),
    Testimonial(
        id="2",
        name="Camila Rodrigues",
        role="Esteticista",
        content=(
            "Fiz o curso de Limpeza de Pele Profunda e saí preparada para atender no mesmo dia! "
            "A metodologia é excepcional, com muita prática e material de apoio completo. "
            "Super recomendo!"
        ),
        rating=5,
        image="/assets/testimonial-2.webp",
    ),
    Testimonial(
        id="3",
        name="Juliana Oliveira",
        role="Micropigmentadora",
        content=(
            "Já tinha experiência na área, mas o curso de Shadow 3D da Studio Ju Carvalho elevou "
            "meu trabalho a outro nível. As técnicas são avançadas e os resultados impressionam "
            "minhas clientes!"
        ),
        rating=5,
        image="/assets/testimonial-3.webp",
    ),
]

FAQ_ITEMS: list[FAQItem] = [
    FAQItem(
        id="1",
        question="Os cursos incluem material didático?",
        answer=(
            "Sim! Todos os cursos incluem material de estudo completo, kit personalizado para "
            "prática, coffee break durante as aulas e certificado de conclusão."
        ),
    ),
    FAQItem(
        id="2",
        question="Preciso ter experiência prévia?",
        answer=(
            "Não! Nossos cursos são desenvolvidos tanto para iniciantes quanto para profissionais "
            "que desejam aprimorar suas técnicas. Temos turmas específicas para cada nível."
        ),
    ),
    FAQItem(
        id="3",
        question="Como funciona a parte prática?",
        answer=(
            "Todos os cursos incluem prática supervisionada em modelo real. Você terá "
            "acompanhamento individual durante toda a execução, garantindo segurança e confiança "
            "para iniciar seus atendimentos."
        ),
    ),
    FAQItem(
        id="4",
        question="Qual a forma de pagamento?",
        answer=(
            "Aceitamos pagamento via PIX, cartão de crédito (parcelamento disponível) e "
            "transferência bancária. Entre em contato para consultar condições especiais."
        ),
    ),
    FAQItem(
        id="5",
        question="Recebo certificado?",
        answer=(
            "Sim! Ao concluir o curso, você receberá um certificado de conclusão reconhecido, "
            "que comprova sua formação e capacitação técnica na área."
        ),
    ),
    FAQItem(
        id="6",
        question="As turmas são limitadas?",
        answer=(
            "Sim! Trabalhamos com turmas reduzidas para garantir atendimento personalizado e "
            "qualidade no ensino. Por isso, recomendamos garantir sua vaga com antecedência."
        ),
    ),
]
